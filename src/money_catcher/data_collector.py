"""Episode recording for the catcher environment.

Each episode becomes one ``.npz`` archive: the state vector per step, the two
key flags, the shaped reward and its raw signals, the running score and
per-kind tally, optional RGB frames, and a JSON metadata blob with an episode
summary. ``load_episode`` reads an archive back for replay or analysis.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, List, Union

import numpy as np

from .rewards import SORTED_REWARDS

_EPISODE_FILE = re.compile(r"^episode_(\d+)$")


def _json_default(obj: Any) -> Any:
    """Fallback for numpy scalars and arrays in metadata."""
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def _tally_row(info: Dict[str, Any]) -> List[int]:
    """Per-kind catch counts from an env info dict, in catalog order."""
    collection = info.get("collection", {})
    return [int(collection.get(reward.kind.value, 0)) for reward in SORTED_REWARDS]


@dataclass
class EpisodeBuffer:
    """Per-step arrays for the episode being recorded.

    ``states``, ``scores``, ``tallies`` and ``rgb_frames`` hold one more entry
    than the per-action lists: the observation returned by reset.
    """
    states: List[np.ndarray] = field(default_factory=list)
    scores: List[int] = field(default_factory=list)
    tallies: List[List[int]] = field(default_factory=list)
    rgb_frames: List[np.ndarray] = field(default_factory=list)
    actions_left: List[int] = field(default_factory=list)
    actions_right: List[int] = field(default_factory=list)
    rewards: List[float] = field(default_factory=list)
    reward_signals: List[Dict[str, float]] = field(default_factory=list)
    terminated: List[bool] = field(default_factory=list)
    truncated: List[bool] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def num_steps(self) -> int:
        return len(self.rewards)

    def summary(self) -> Dict[str, Any]:
        final_tally = self.tallies[-1] if self.tallies else [0] * len(SORTED_REWARDS)
        return {
            "steps": self.num_steps,
            "final_score": self.scores[-1] if self.scores else 0,
            "caught": {
                reward.kind.value: count for reward, count in zip(SORTED_REWARDS, final_tally)
            },
            "game_over": bool(self.terminated and self.terminated[-1]),
        }

    def to_arrays(self, include_rgb: bool) -> Dict[str, np.ndarray]:
        data = {
            "states": np.array(self.states, dtype=np.float32),
            "scores": np.array(self.scores, dtype=np.int32),
            "tallies": np.array(self.tallies, dtype=np.int32).reshape(-1, len(SORTED_REWARDS)),
            "actions_left": np.array(self.actions_left, dtype=np.int8),
            "actions_right": np.array(self.actions_right, dtype=np.int8),
            "rewards": np.array(self.rewards, dtype=np.float32),
            "terminated": np.array(self.terminated, dtype=np.bool_),
            "truncated": np.array(self.truncated, dtype=np.bool_),
        }
        if include_rgb and self.rgb_frames:
            data["rgb_frames"] = np.array(self.rgb_frames, dtype=np.uint8)

        # One array per raw signal, e.g. reward_catch, reward_death
        if self.reward_signals:
            for key in self.reward_signals[0]:
                data[f"reward_{key}"] = np.array(
                    [signals[key] for signals in self.reward_signals], dtype=np.float32
                )
        return data


class TrajectoryCollector:
    """Records CatcherEnv episodes to disk.

    Usage:
        collector = TrajectoryCollector(output_dir="data/trajectories")
        obs, info = env.reset(seed=0)
        collector.begin_episode(obs, info, metadata={"policy": "chaser"})

        while True:
            action = policy(obs)
            obs, reward, terminated, truncated, info = env.step(action)
            collector.record_step(action, obs, reward, terminated, truncated, info)
            if terminated or truncated:
                collector.end_episode()
                break
    """

    def __init__(
        self,
        output_dir: str = "data/trajectories",
        save_rgb: bool = True,
        compress: bool = True,
    ):
        """Initialize collector.

        Args:
            output_dir: Directory for episode archives. Created if missing.
            save_rgb: Whether to store RGB frames (large).
            compress: Whether to write compressed archives.
        """
        self.output_dir = Path(output_dir)
        self.save_rgb = save_rgb
        self.compress = compress
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self._buffer: Optional[EpisodeBuffer] = None
        self._episode_count = self._next_episode_index()

    def _next_episode_index(self) -> int:
        """Continue numbering after any episode_NNNN.npz already in the directory."""
        indices = []
        for path in self.output_dir.glob("episode_*.npz"):
            match = _EPISODE_FILE.match(path.stem)
            if match:
                indices.append(int(match.group(1)))
        return max(indices) + 1 if indices else 0

    def _append_observation(self, obs: Dict[str, np.ndarray], info: Dict[str, Any]):
        buffer = self._buffer
        buffer.states.append(np.asarray(obs["state"], dtype=np.float32))
        buffer.scores.append(int(info.get("score", 0)))
        buffer.tallies.append(_tally_row(info))
        if self.save_rgb:
            buffer.rgb_frames.append(obs["rgb"])

    def begin_episode(self, obs: Dict[str, np.ndarray], info: Dict[str, Any],
                      metadata: Optional[Dict[str, Any]] = None):
        """Start a new episode from the reset observation.

        Any episode still being recorded is discarded.
        """
        self._buffer = EpisodeBuffer(metadata=dict(metadata or {}))
        self._buffer.metadata["initial_info"] = info
        self._append_observation(obs, info)

    def record_step(
        self,
        action,
        obs: Dict[str, np.ndarray],
        reward: float,
        terminated: bool,
        truncated: bool,
        info: Dict[str, Any],
    ):
        """Append one env.step() result. Ignored when no episode is open.

        Args:
            action: (moving_left, moving_right) flags as passed to env.step().
        """
        if self._buffer is None:
            return

        flags = np.asarray(action).reshape(-1)
        self._buffer.actions_left.append(int(flags[0]))
        self._buffer.actions_right.append(int(flags[1]))
        self._buffer.rewards.append(float(reward))
        if "reward_signals" in info:
            self._buffer.reward_signals.append(info["reward_signals"])
        self._buffer.terminated.append(bool(terminated))
        self._buffer.truncated.append(bool(truncated))
        self._append_observation(obs, info)

    def end_episode(self, filename: Optional[str] = None) -> Optional[Path]:
        """Write the open episode to disk.

        Args:
            filename: Archive name inside ``output_dir``. Defaults to
                ``episode_NNNN.npz`` with the next free index.

        Returns:
            Path of the written archive, or None if no episode was open.
        """
        if self._buffer is None:
            return None

        buffer, self._buffer = self._buffer, None

        data = buffer.to_arrays(include_rgb=self.save_rgb)
        metadata = dict(buffer.metadata, summary=buffer.summary())
        data["metadata_json"] = np.array(json.dumps(metadata, default=_json_default))

        filepath = self.output_dir / (filename or f"episode_{self._episode_count:04d}.npz")
        save = np.savez_compressed if self.compress else np.savez
        save(filepath, **data)

        self._episode_count += 1
        return filepath

    @property
    def episode_count(self) -> int:
        return self._episode_count

    @property
    def recording(self) -> bool:
        return self._buffer is not None


def load_episode(path: Union[str, Path]) -> Dict[str, Any]:
    """Read an episode archive into a dict of arrays plus parsed ``metadata``."""
    with np.load(path) as archive:
        episode: Dict[str, Any] = {key: archive[key] for key in archive.files}
    metadata_json = episode.pop("metadata_json", None)
    episode["metadata"] = json.loads(str(metadata_json)) if metadata_json is not None else {}
    return episode
