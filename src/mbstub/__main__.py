"""Allow running as: python -m mbstub"""

from .cli import main

if __name__ == '__main__':
    main()
