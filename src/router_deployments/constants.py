"""Configuration constants for router-deployments library."""

# Contract deployed by the router migration
ROUTER_CONTRACT = "UniswapV2Router02"

# Already-deployed factory the router is bound to
FACTORY_ADDRESS = "0x4207CD6E113E364220EC08e2Ff446973437859fd"

# Canonical wrapped native token (WETH) per network
WETH_ADDRESSES = {
    "mainnet": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
    "ropsten": "0xc778417E063141139Fce010982780140Aa0cD5Ab",
    "rinkeby": "0xc778417E063141139Fce010982780140Aa0cD5Ab",
    "goerli": "0xB4FBF271143F4FBf7B91A5ded31805e42b2208d6",
    "kovan": "0xd0A1E359811322d97991E03f863a0C30C2cF029C",
}

# Solidity compiler the build artifacts are expected to come from
COMPILER_VERSION = "0.6.6"

INFURA_URL_TEMPLATE = "https://{network}.infura.io/v3/{api_key}"

# Secrets are only ever read from these environment variables
API_KEY_ENV = "INFURA_API_KEY"
MNEMONIC_ENV = "DEPLOYER_MNEMONIC"

# Network connection profiles
NETWORK_CONFIG = {
    "mainnet": {
        "network_id": 1,
        "chain_name": "Ethereum Mainnet",
        "block_explorer_url": "https://etherscan.io",
        "gas": 5500000,
        "confirmations": 2,
        "timeout_blocks": 200,
        "skip_dry_run": True,
    },
    "ropsten": {
        "network_id": 3,
        "chain_name": "Ropsten",
        "block_explorer_url": "https://ropsten.etherscan.io",
        "gas": 8000000,
        "confirmations": 2,
        "timeout_blocks": 200,
        "skip_dry_run": True,
    },
    "rinkeby": {
        "network_id": 4,
        "chain_name": "Rinkeby",
        "block_explorer_url": "https://rinkeby.etherscan.io",
        "gas": 5500000,
        "confirmations": 2,
        "timeout_blocks": 200,
        "skip_dry_run": True,
    },
    "goerli": {
        "network_id": 5,
        "chain_name": "Goerli",
        "block_explorer_url": "https://goerli.etherscan.io",
        "gas": 5500000,
        "confirmations": 2,
        "timeout_blocks": 200,
        "skip_dry_run": True,
    },
    "kovan": {
        "network_id": 42,
        "chain_name": "Kovan",
        "block_explorer_url": "https://kovan.etherscan.io",
        "gas": 5500000,
        "confirmations": 2,
        "timeout_blocks": 200,
        "skip_dry_run": True,
    },
}

# BIP-44 derivation path used by HD wallet providers
DERIVATION_PATH = "m/44'/60'/0'/0/{index}"

# Seconds between block polls while waiting for confirmations
DEFAULT_POLL_INTERVAL = 4.0
