"""
nativeexport package entry point.

Allows running nativeexport as a module:
    python -m nativeexport
"""

from nativeexport.cli import main

if __name__ == "__main__":
    main()
