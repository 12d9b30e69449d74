"""StickerJournal: a local-first sticker journal with canvas composing and OCR scanning."""

__version__ = "0.1.0"
