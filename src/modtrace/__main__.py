"""Main entry point for the modtrace package."""
from modtrace.cli import main


if __name__ == "__main__":
    main()
