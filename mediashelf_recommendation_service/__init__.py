"""Content-based book and TV show recommendations with cross-media matching"""
