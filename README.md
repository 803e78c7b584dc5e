# rainytrace

The core pieces of a physically based ray tracer, in plain Python with no
third-party dependencies.

## Modules

- `rainytrace.mathutil`: numeric helpers (`next_float_up`,
  `next_float_down`, `gamma`, `gamma_correct`, `clamp`, `mod`, `lerp`,
  `quadratic`, `find_interval`, `erf`, `erf_inv` and bit helpers), constants
  such as `PI` and `INV_PI`, and the `TransportMode` enum.
- `rainytrace.spectrum`: `Spectrum`, an RGB colour with an alpha channel,
  with arithmetic, `luminance`, `is_black`, `clamp`, `normalize` and `sqrt`.
- `rainytrace.geometry`: the `Vector3` and `Point2` value types, and
  `reflect`, `refract` (returns `None` on total internal reflection) and
  `faceforward`.
- `rainytrace.transform`: `Matrix4x4` (with `transpose`, `inverse` and the
  `@` operator), `Transform` (with `apply_point`, `apply_vector`,
  `apply_normal`, `inverse`, `swaps_handedness`), the builders `translate`,
  `scale`, `rotate_x`, `rotate_y`, `rotate_z`, `rotate`, `look_at`,
  `orthographic` and `perspective`, and `Interval` arithmetic with
  `interval_find_zeros`.
- `rainytrace.sampling`: sphere, hemisphere, disk and cosine-weighted
  sampling, `balance_heuristic` and `power_heuristic`, and
  `Distribution1D` for sampling piecewise-constant functions.
- `rainytrace.rng`: the seeded `RNG`.
- `rainytrace.sampler`: `CameraSample` and the abstract `Sampler`,
  `PixelSampler` and `GlobalSampler` bases.
- `rainytrace.lightdistrib`: `UniformDistribution`, `PowerDistribution` and
  `light_power_distribution`, which choose among any objects that have a
  `power()` method returning a `Spectrum`.
- `rainytrace.filter`: `BoxFilter`, `GaussianFilter` and `LanczosSincFilter`.
- `rainytrace.film`: `Film`, which accumulates filtered samples
  (`add`, `add_splat`), gives final colours (`resolve`) and writes them
  as PPM (`flush`).
- `rainytrace.image`: `format_ppm` and `save_ppm` for ASCII PPM images.
- `rainytrace.bsdf`: `BxDFType`, the `BxDF` base class, `BxDFSample` and
  `BSDF`, which combines several lobes in a shading frame.
- `rainytrace.fresnel`: `fr_dielectric`, `fr_conductor` and the
  `FresnelDielectric`, `FresnelConductor` and `FresnelNoOp` classes.
- `rainytrace.lambertian`: `LambertianReflection` and
  `LambertianTransmission`.
- `rainytrace.specular`: `SpecularReflection`, `SpecularTransmission` and
  `FresnelSpecular`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from rainytrace.geometry import Vector3
from rainytrace.fresnel import fr_dielectric
from rainytrace.transform import translate, rotate

# Reflectance of glass at normal incidence
print(fr_dielectric(1.0, 1.0, 1.5))  # about 0.04

# Compose transforms and apply one to a point
t = translate(Vector3(0, 1, 0)) * rotate(90, Vector3(0, 0, 1))
print(t.apply_point(Vector3(1, 0, 0)))  # about Vector3(0, 2, 0)
```

Sampling a diffuse lobe. `sample_f` returns a `BxDFSample` with the fields
`f`, `wi`, `pdf` and `sampled_type`:

```python
from rainytrace.geometry import Point2, Vector3
from rainytrace.lambertian import LambertianReflection
from rainytrace.spectrum import Spectrum

lobe = LambertianReflection(Spectrum(0.8))
sample = lobe.sample_f(Vector3(0, 0, 1), Point2(0.3, 0.7))
print(sample.wi, sample.pdf, sample.f)
```

Accumulating samples on a film and writing an image:

```python
from rainytrace.film import Film
from rainytrace.geometry import Point2
from rainytrace.spectrum import Spectrum

film = Film(4, 2, filename="out")
film.add(Point2(1.5, 0.5), Spectrum(0.5, 0.25, 1.0))
path = film.flush()  # "out" plus the processor time in ms, then ".ppm"
print(path)
```

`save_ppm` writes any sequence of three-channel pixels directly:

```python
from rainytrace.image import save_ppm
from rainytrace.spectrum import Spectrum

pixels = [Spectrum(0.5, 0.25, 1.0)] * (4 * 2)
save_ppm("out.ppm", pixels, 4, 2)
```

## What it does not include

This package provides the numerical building blocks only. It has no shapes,
scene description, ray-scene intersection, cameras, light sources,
materials or integrators, and no command that renders an image. Images are
produced only by filling a `Film` (or a list of pixels) yourself and writing
it out as PPM.