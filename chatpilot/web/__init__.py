"""HTTP surface for the chat client."""
