"""ContractFlow — contract-lifecycle management REST backend."""
