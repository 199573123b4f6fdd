from hypothesis import HealthCheck, settings

# Cold-start strategy compilation (e.g. unicode character tables) can trip the
# input-generation timing health check on a fresh checkout.
settings.register_profile("default", suppress_health_check=[HealthCheck.too_slow])
settings.load_profile("default")
