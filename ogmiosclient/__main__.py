"""
Entry point for running ogmiosclient as a module: python -m ogmiosclient
"""

from ogmiosclient.cli.commands import app

if __name__ == "__main__":
    app()
