"""Building blocks for a physically based ray tracer: spectra, transforms, sampling, filters, film and BSDFs."""

__version__ = "0.1.0"