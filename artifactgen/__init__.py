"""Generate client, model, interface and server artifacts from API specs."""
