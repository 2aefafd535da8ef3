# WALLET_VERIFIED_<address>_EXP_<epoch ms>_SIG_<signature>
WALLET_TOKEN_PREFIX = 'WALLET_VERIFIED_'
WALLET_TOKEN_EXPIRY_SEPARATOR = '_EXP_'
WALLET_TOKEN_SIGNATURE_SEPARATOR = '_SIG_'
WALLET_TOKEN_SIGNATURE_LENGTH = 32
