"""On-demand HTTP/TCP availability checks with TLS certificate inspection."""
