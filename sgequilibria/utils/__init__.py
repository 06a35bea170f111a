from sgequilibria.utils.sampling import StrategySampler, sample_strategy, shared_sampler, reset_shared_sampler
