# Credit File Normalizer services
