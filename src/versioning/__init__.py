"""Version records and their ordering."""
