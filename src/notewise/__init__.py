"""NoteWise: AI study assistant.

Turns an uploaded document or pasted text into study notes, then derives a
summary, flashcards and key concepts from those notes. Also answers questions
grounded in the notes, explains note segments in simple terms and keeps
per-session highlights and annotations.
"""

__version__ = "0.1.0"
