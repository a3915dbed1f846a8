"""Remote model clients: Claude for text and vision, Hugging Face for embeddings and images."""
