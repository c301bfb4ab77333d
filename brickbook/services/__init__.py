"""Business services: pay rates, ledgers, workers, brick loads, auth."""
