"""
Sampling concrete action indices from mixed strategies.
"""
import logging
from typing import Optional

import torch

from sgequilibria.core.constants import DTYPE, DEFAULT_SEED
from sgequilibria.errors import MalformedDistribution

logger = logging.getLogger(__name__)


class StrategySampler:
    """
    Draws action indices from probability vectors using its own torch.Generator,
    so an agent's choices are reproducible from its seed alone.
    """

    def __init__(self, seed: Optional[int] = None, generator: Optional[torch.Generator] = None):
        """
        Args:
            seed: Seed for a fresh generator (ignored if generator is given)
            generator: Existing generator to draw from
        """
        if generator is None:
            generator = torch.Generator()
            if seed is None:
                generator.seed()
            else:
                generator.manual_seed(seed)
        self.generator = generator

    def sample(self, strategy) -> int:
        """
        Sample an action index.

        Args:
            strategy: 1-D probabilities where strategy[i] is the probability of action i

        Returns:
            The first index whose cumulative probability exceeds a uniform [0, 1) draw

        Raises:
            MalformedDistribution: if the cumulative probability never exceeds the draw
        """
        return sample_strategy(strategy, self.generator)


def sample_strategy(strategy, generator: Optional[torch.Generator] = None) -> int:
    roll = torch.rand(1, generator=generator, dtype=DTYPE).item()
    total = 0.0
    for i, p in enumerate(torch.as_tensor(strategy, dtype=DTYPE).reshape(-1).tolist()):
        total += p
        if roll < total:
            logger.debug("Sampled action %d (roll %.6f)", i, roll)
            return i
    raise MalformedDistribution(total)


# one sampler for every agent that is not given its own, so agents in the
# same world draw from a single stream instead of repeating each other
_shared_sampler: Optional[StrategySampler] = None


def shared_sampler() -> StrategySampler:
    """Process-wide sampler seeded with DEFAULT_SEED on first use."""
    global _shared_sampler
    if _shared_sampler is None:
        _shared_sampler = StrategySampler(seed=DEFAULT_SEED)
    return _shared_sampler


def reset_shared_sampler(seed: int = DEFAULT_SEED) -> StrategySampler:
    """Reseed the shared sampler, e.g. at the start of an experiment."""
    shared_sampler().generator.manual_seed(seed)
    return _shared_sampler
