"""Test configuration for event_disaggregation tests."""
import sys
from pathlib import Path

# Add src/ to path so the package imports without installation
src_dir = str(Path(__file__).resolve().parent.parent / 'src')
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)
