"""seirdyn, SEIRD epidemic dynamics on jax.

seirdyn simulates a Susceptible, Exposed, Infectious, Recovered, Deceased
compartmental model with vaccination and waning immunity, using explicit
Euler, classical Runge-Kutta or adaptive Dormand-Prince steppers, and
evaluates the model over batches of independent populations with jax.vmap.
"""

import importlib

import jax

# every constant and tolerance in seirdyn assumes double precision
jax.config.update("jax_enable_x64", True)

from . import config, simulation, typing, utils, vis_utils  # noqa: E402

# Defines all the different modules able to be imported from src
__all__ = ["config", "simulation", "typing", "utils", "vis_utils"]
submodules = ["config", "simulation", "typing", "utils"]
# Append the __all__ of all submodules to the main __all__
for submodule in submodules:
    module = importlib.import_module(f".{submodule}", package="seirdyn")
    if hasattr(module, "__all__"):
        for attr in module.__all__:
            globals()[attr] = getattr(module, attr)
            __all__.append(attr)
# effectively flattens all submodules into seirdyn namespace.
