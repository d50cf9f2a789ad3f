from uni_spline import (
    CubicSpline, ControlPoint,
    compute_spline, solve_clamped_derivatives,
    SignalDamper, light_response_spline,
)
import numpy as np
import torch

if __name__ == "__main__":
    # =========================================================================
    # 1. 样本点 + 端点切线 (求解导数)
    # =========================================================================
    samples = [(0.1, 0.3), (0.4, 0.6), (1.0, 1.0), (2.0, 1.6), (2.5, 2.0)]
    spline = compute_spline(samples, tangent_at_start=0.0, tangent_at_end=0.0)

    for x in [0.05, 0.1, 0.7, 1.5, 2.5, 3.0]:
        print(f"  f({x:.2f}) = {spline(x):.4f}")

    print(f"控制点: {spline.control_points}")

    # =========================================================================
    # 2. 已知导数的控制点 (跳过求解)
    # =========================================================================
    print("\n已知导数:")

    line = CubicSpline.from_control_points([ControlPoint(0, 0, 1), ControlPoint(1, 1, 1)])
    print(f"直线 f(0.5) = {line(0.5)}")

    # =========================================================================
    # 3. 批量求值 / 导数
    # =========================================================================
    print("\n批量求值:")

    query = np.linspace(0.0, 3.0, 7)
    print(f"值: {spline.evaluate(query)}")
    print(f"一阶导数: {spline.derivative(query, order=1)}")

    # =========================================================================
    # 4. PyTorch 后端
    # =========================================================================
    print("\nPyTorch:")

    spline_t = CubicSpline.from_samples(torch.tensor(samples, dtype=torch.float64))
    print(f"值: {spline_t.evaluate(torch.from_numpy(query))}")

    d = solve_clamped_derivatives(np.array([0.0, 1.0, 0.0, 1.0]), 0.0, 0.0)
    print(f"导数: {d}")

    # =========================================================================
    # 5. 信号阻尼 (光照强度)
    # =========================================================================
    print("\n信号阻尼:")

    damper = SignalDamper(light_response_spline(), threshold=0.01)
    damper.subscribe(lambda damped, raw: print(f"  raw={raw:.2f} -> {damped:.4f}"))
    for raw in [0.0, 0.5, 0.505, 1.2, 2.8, 3.5]:
        damper.update(raw)

    print("\n✅ Done!")
