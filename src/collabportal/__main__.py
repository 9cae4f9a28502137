"""Entry point for 'python -m collabportal' command."""

from collabportal.cli import main

if __name__ == "__main__":
    main()
