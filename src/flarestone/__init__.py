# ABOUTME: Flarestone package: declarative HTML-to-record extraction for Lodestone pages
# ABOUTME: Layers are engine (extraction and serialization), models, transformers and utils
