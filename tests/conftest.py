"""Pytest configuration"""

import sys
from pathlib import Path

# Add src/ to path for faqbot imports without installing the package
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))
