"""Presence tracking and Socket.IO delivery of game and chat signals."""
