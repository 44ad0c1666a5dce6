"""Command-line interface."""
from topoedit.main import main

if __name__ == "__main__":
    main()
