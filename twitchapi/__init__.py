"""
Twitch API - Transports (IRC over WebSocket)
"""
