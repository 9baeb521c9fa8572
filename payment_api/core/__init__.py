# Core modules
