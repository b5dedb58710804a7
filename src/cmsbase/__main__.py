"""Entry point for 'python -m cmsbase'."""

from cmsbase.cli import main

if __name__ == "__main__":
    main()
