"""autosign CLI entry."""

from autosign.cli import app

if __name__ == "__main__":
    app()
