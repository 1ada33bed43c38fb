"""Main entry point for the NexMeet event bot and HTTP API."""

from nexmeet_bot.main import cli


if __name__ == "__main__":
    cli()
