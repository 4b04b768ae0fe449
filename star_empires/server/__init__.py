"""HTTP/WebSocket server for Star Empires."""
