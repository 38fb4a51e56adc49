"""VidTube - video sharing backend."""
