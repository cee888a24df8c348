"""
Conversation ingest package.

This package normalizes loosely structured conversation records into one
canonical form (speaker-attributed turns with relative timestamps):
- detecting the input format (JSON transcript, chat log, WhatsApp, SRT),
- parsing it leniently,
- previewing or storing the result.
"""
