"""Utility functions and tools used across the rgeana package.

**Core Utilities:**
- `errors`: Enumerated error kinds and the exceptions which carry them
- `factory`: Generic factory pattern implementations
- `globals`: Detector constants, bank names and physical masses
- `logger`: Logging utilities and configuration
- `pid`: Table of particle identity hypotheses
- `stopwatch`: Performance timing utilities
"""
