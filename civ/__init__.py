"""CI-V wire protocol: codecs, frames, commands and responses."""
