"""
AI Module - Intent classification for inbound chat messages.

- providers/: text-generation clients (Gemini)
- prompts/: prompt templates
- intent/: IntentClassifier interface with pattern and LLM strategies
"""
