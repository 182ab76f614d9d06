"""Utilitários compartilhados (erros, locks)."""
