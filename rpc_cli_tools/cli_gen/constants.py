GENERATOR_LOG_CLASS = "rpc-cli-gen"
