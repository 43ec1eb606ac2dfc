import os

# Plotting tests run headless: the visualization module selects Agg without a display.
os.environ.pop("DISPLAY", None)
