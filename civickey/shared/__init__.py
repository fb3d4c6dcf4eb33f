"""Cross-cutting helpers shared by every layer (logging, datetime, text, i18n)."""
