"""
Snaketris Package
=================

A snake and a stream of falling blocks sharing one grid. This package holds
the simulation core:

- Snake motion, growth and collisions
- Falling piece descent, rotation, suspension and settling
- Apple and star spawning
- Destruction mode and explosions
- Scoring, speed-up and the persisted high score

All tunable parameters live in game_config.yaml and form the game's single
locked rule set.
"""
