"""
Water Drop
==========

A single-screen arcade game: steer a falling drop of clean water through
gaps in scrolling pipe pairs. Each pair cleared delivers water to one more
person; touching a pipe or leaving the screen ends the run.

The game core lives in ``waterdrop.drop_core``; the interactive pygame
front end is ``tools/play_human.py``. Tunable constants are in
game_config.yaml.
"""
