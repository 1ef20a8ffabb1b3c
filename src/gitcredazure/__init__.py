"""Git credential helper backed by Azure CLI OAuth tokens."""
