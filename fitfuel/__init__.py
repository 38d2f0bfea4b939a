"""
FitFuel Package
===============

Game cores embedded in the FitFuel app. The burger dodge engine lives in
``fitfuel.burger_core``; the host app owns rendering, input capture and
persistence of the values the engine reports:

- Final weight and win/lose result of an attempt
- Points awarded on a win
- Highest level reached and games played

All tunable parameters are in game_config.yaml.
"""
