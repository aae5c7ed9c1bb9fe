"""
Fixed-step integrators: next_state = step(state, t, dt, derivative_fn).

Pure numerical level: no dependency on the simulation lifecycle.
Every intermediate vector (k1..k4, temp, result) lives in a fixed-capacity
IntegratorWorkspace; only a copy of the first n result elements is returned.
A workspace must not be shared by calls that can run concurrently: each
Simulation owns one. Calls without a workspace get a private temporary one.
"""

from typing import Callable, Optional, Tuple

import numpy as np

from pendulab.core.errors import StateCapacityError

# Derivative function: (t, state) -> d(state)/dt, same length as state
DerivativeFn = Callable[[float, np.ndarray], np.ndarray]
# Acceleration function for Verlet: (positions, velocities) -> accelerations
AccelerationFn = Callable[[np.ndarray, np.ndarray], np.ndarray]

# 10 coupled bodies, coordinates + velocities
MAX_STATE_SIZE = 20


class IntegratorWorkspace:
    """Pre-allocated scratch buffers for one integrator."""

    def __init__(self, capacity: int = MAX_STATE_SIZE) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.k1 = np.zeros(capacity)
        self.k2 = np.zeros(capacity)
        self.k3 = np.zeros(capacity)
        self.k4 = np.zeros(capacity)
        self.temp = np.zeros(capacity)
        self.result = np.zeros(capacity)

    def check(self, n: int) -> None:
        if n > self.capacity:
            raise StateCapacityError(
                f"State of length {n} exceeds workspace capacity {self.capacity}"
            )


def _resolve(workspace: Optional[IntegratorWorkspace], n: int) -> IntegratorWorkspace:
    if workspace is None:
        workspace = IntegratorWorkspace(max(n, 1))
    workspace.check(n)
    return workspace


def euler_step(
    state: np.ndarray,
    t: float,
    dt: float,
    derivative_fn: DerivativeFn,
    workspace: Optional[IntegratorWorkspace] = None,
) -> np.ndarray:
    """Explicit Euler, order 1: y_{n+1} = y_n + dt * f(t_n, y_n)."""
    y = np.asarray(state, dtype=float)
    n = y.size
    ws = _resolve(workspace, n)
    out = ws.result[:n]
    out[:] = derivative_fn(t, y)
    out *= dt
    out += y
    return out.copy()


def verlet_step(
    positions: np.ndarray,
    velocities: np.ndarray,
    dt: float,
    accel_fn: AccelerationFn,
    workspace: Optional[IntegratorWorkspace] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Velocity Verlet, order 2.

    x' = x + v dt + a dt^2 / 2 with a = accel(x, v); the velocity is advanced
    with the mean of a and accel(x', v).
    """
    x = np.asarray(positions, dtype=float)
    v = np.asarray(velocities, dtype=float)
    m = x.size
    ws = _resolve(workspace, 2 * m)
    a = ws.k1[:m]
    a_new = ws.k2[:m]
    x_new = ws.result[:m]
    v_new = ws.result[m : 2 * m]

    a[:] = accel_fn(x, v)
    np.multiply(a, 0.5 * dt * dt, out=x_new)
    np.multiply(v, dt, out=ws.temp[:m])
    x_new += ws.temp[:m]
    x_new += x

    a_new[:] = accel_fn(x_new, v)
    np.add(a, a_new, out=v_new)
    v_new *= 0.5 * dt
    v_new += v
    return x_new.copy(), v_new.copy()


def rk4_step(
    state: np.ndarray,
    t: float,
    dt: float,
    derivative_fn: DerivativeFn,
    workspace: Optional[IntegratorWorkspace] = None,
) -> np.ndarray:
    """Classic Runge-Kutta 4, order 4."""
    y = np.asarray(state, dtype=float)
    n = y.size
    ws = _resolve(workspace, n)
    k1, k2, k3, k4 = ws.k1[:n], ws.k2[:n], ws.k3[:n], ws.k4[:n]
    temp, out = ws.temp[:n], ws.result[:n]
    half = 0.5 * dt

    k1[:] = derivative_fn(t, y)

    np.multiply(k1, half, out=temp)
    temp += y
    k2[:] = derivative_fn(t + half, temp)

    np.multiply(k2, half, out=temp)
    temp += y
    k3[:] = derivative_fn(t + half, temp)

    np.multiply(k3, dt, out=temp)
    temp += y
    k4[:] = derivative_fn(t + dt, temp)

    # y + dt/6 * (k1 + 2 k2 + 2 k3 + k4)
    np.add(k2, k3, out=out)
    out *= 2.0
    out += k1
    out += k4
    out *= dt / 6.0
    out += y
    return out.copy()


class EulerIntegrator:
    """Explicit Euler integrator, order 1."""

    method = "euler"

    def __init__(self, capacity: int = MAX_STATE_SIZE) -> None:
        self.workspace = IntegratorWorkspace(capacity)

    def step(self, state: np.ndarray, t: float, dt: float, derivative_fn: DerivativeFn) -> np.ndarray:
        return euler_step(state, t, dt, derivative_fn, self.workspace)


class VerletIntegrator:
    """
    Velocity Verlet on a [coordinates..., velocities...] state.
    The acceleration is the second half of derivative_fn evaluated at time t.
    """

    method = "verlet"

    def __init__(self, capacity: int = MAX_STATE_SIZE) -> None:
        self.workspace = IntegratorWorkspace(capacity)
        self._packed = np.zeros(capacity)

    def step(self, state: np.ndarray, t: float, dt: float, derivative_fn: DerivativeFn) -> np.ndarray:
        y = np.asarray(state, dtype=float)
        n = y.size
        if n % 2:
            raise ValueError(f"Verlet needs an even state length, got {n}")
        self.workspace.check(n)
        m = n // 2
        packed = self._packed[:n]

        def accel(x: np.ndarray, v: np.ndarray) -> np.ndarray:
            packed[:m] = x
            packed[m:] = v
            return derivative_fn(t, packed)[m:]

        x_new, v_new = verlet_step(y[:m], y[m:], dt, accel, self.workspace)
        return np.concatenate((x_new, v_new))


class RK4Integrator:
    """Runge-Kutta 4 integrator, order 4."""

    method = "rk4"

    def __init__(self, capacity: int = MAX_STATE_SIZE) -> None:
        self.workspace = IntegratorWorkspace(capacity)

    def step(self, state: np.ndarray, t: float, dt: float, derivative_fn: DerivativeFn) -> np.ndarray:
        return rk4_step(state, t, dt, derivative_fn, self.workspace)


_INTEGRATORS = {
    "euler": EulerIntegrator,
    "verlet": VerletIntegrator,
    "rk4": RK4Integrator,
}


def get_integrator(method: str, capacity: int = MAX_STATE_SIZE):
    """New integrator (with its own workspace) for a method name."""
    try:
        cls = _INTEGRATORS[method]
    except KeyError:
        raise ValueError(f"Unknown integration method {method!r}; expected one of {sorted(_INTEGRATORS)}")
    return cls(capacity)
