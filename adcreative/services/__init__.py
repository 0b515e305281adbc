# Optimizer services
