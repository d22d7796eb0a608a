"""
Zentia Infrastructure Layer

External integrations: the Supabase database, the Gemini model,
error tracking and metrics.
"""
