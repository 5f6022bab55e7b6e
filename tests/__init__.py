"""Test suite for ambiance-routing.

Test Structure:
- unit/channels/: catalog, detection, resolution, applying resolutions
- unit/host/: send encoding and the in-memory track graph
- unit/project/, unit/config/, unit/utils/: persistence, configuration, logging
- unit/cli/: the ambiance-routing command
"""
