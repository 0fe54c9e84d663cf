"""Cross-cutting helpers: logging, telemetry and the error taxonomy."""
