"""
Run with: python -m blochsim
"""
import sys

from blochsim.main import main

if __name__ == "__main__":
    sys.exit(main())
