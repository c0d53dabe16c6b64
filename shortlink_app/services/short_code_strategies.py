"""
Short code generation strategies for the registry.
Uses Strategy Pattern to allow different generation algorithms.
"""

import string
import random
from abc import ABC, abstractmethod
from typing import Collection, Optional

from shortlink_app.exceptions import ShortCodeExhaustedError


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""
    
    @abstractmethod
    def generate(self, existing_codes: Collection[str]) -> str:
        """
        Generate a short code.
        
        Args:
            existing_codes: Every short code already in the record store,
                            expired records included
            
        Returns:
            A short code string not present in existing_codes
        """
        pass


class RandomShortCodeStrategy(ShortCodeStrategy):
    """
    Random generation strategy.
    Samples characters uniformly from [a-zA-Z0-9] and retries on collision.
    
    With the default max_retries=None the loop has no upper bound. Over a
    62^6 space a collision is rare at the size of a local store, but a store
    holding every possible code would never terminate. Set max_retries to
    trade that for ShortCodeExhaustedError.
    """
    
    def __init__(
        self,
        length: int = 6,
        max_retries: Optional[int] = None,
        rng: Optional[random.Random] = None
    ):
        self.length = length
        self.max_retries = max_retries
        self.characters = string.ascii_letters + string.digits
        self.rng = rng or random.Random()
    
    def generate(self, existing_codes: Collection[str]) -> str:
        """Generate random short code with collision checking"""
        attempts = 0
        while self.max_retries is None or attempts < self.max_retries:
            attempts += 1
            short_code = self._generate_random_string()
            
            if short_code not in existing_codes:
                return short_code
        
        raise ShortCodeExhaustedError(attempts)
    
    def _generate_random_string(self) -> str:
        """Generate a random string of specified length"""
        return ''.join(self.rng.choice(self.characters) for _ in range(self.length))
