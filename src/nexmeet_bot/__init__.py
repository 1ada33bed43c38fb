"""
NexMeet Event Bot

A Telegram bot and companion HTTP API for discovering NexMeet events:
- Browse active, past and popular events
- Multi-step search by location or category
- AI-assisted free-text search using Mistral
- Read-only REST endpoints backed by the same Supabase table
"""

__version__ = "1.0.0"
__author__ = "NexMeet"
__description__ = "Telegram bot and HTTP API for NexMeet events"
