# src/qamatch/providers/litellm/models.py
"""Curated embedding model constants for the LiteLLM provider.

These are convenience constants for IDE autocomplete. You can always pass any
valid LiteLLM model string directly.

Example:
    from qamatch.providers.litellm import EmbeddingModels, LiteLLMEmbeddingClient

    client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
"""


class EmbeddingModels:
    """Embedding models for LiteLLMEmbeddingClient / ClientEmbedder."""

    # OpenAI
    TEXT_3_SMALL = "openai/text-embedding-3-small"
    TEXT_3_LARGE = "openai/text-embedding-3-large"

    # Google Gemini
    GEMINI_EMBEDDING_001 = "gemini/gemini-embedding-001"
    GEMINI_004 = "gemini/text-embedding-004"

    # AWS Bedrock
    BEDROCK_TITAN_V2 = "bedrock/amazon.titan-embed-text-v2:0"
    BEDROCK_COHERE_V3 = "bedrock/cohere.embed-english-v3"

    # Self-hosted
    OLLAMA_NOMIC = "ollama/nomic-embed-text"
    HF_MINILM_L6 = "huggingface/sentence-transformers/all-MiniLM-L6-v2"
