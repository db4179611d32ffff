"""
Playlister Services Package

Domain logic that sits between the HTTP layer and the DatabaseManager.

Core Services:
- authorization: Playlist ownership decisions (permit / deny)
"""
