import logging
from pathlib import Path

import matplotlib.image as mpimg
import matplotlib.pyplot as plt
import yaml
from matplotlib import patches

from gyb_core.constants import EMPTY_STATE_MESSAGE, LOGO_ASPECT, LOGO_PADDING
from gyb_core.grid import group_sections
from gyb_core.models import GridSlot, LayoutResult, PlacedSponsor, SectionSummary, SlotStatus, Variant
from .settings_manager import SettingsManager

logger = logging.getLogger("gyb")


class SponsorVisualizer:
    """
    Draws a LayoutResult to an image with matplotlib.

    Coordinates are in CSS-like pixels with the origin at the top-left. The
    figure is sized at 72 px per inch so that one point of font size equals
    one pixel of layout, keeping drawn text the same size as the footprints
    used for placement.
    """

    PX_PER_INCH = 72.0
    SECTIONS = ('common', 'cloud', 'grid', 'flow', 'empty')

    def __init__(
        self,
        result: LayoutResult,
        settings_file: str = 'gyb_plot/settings.yaml',
    ) -> None:
        """
        Initialize the visualizer with a layout result and style settings.

        Args:
            result: Layout produced by the LayoutOrchestrator.
            settings_file: Path to YAML settings file.
        Raises:
            ValueError: If result is None.
        """
        if result is None:
            raise ValueError("LayoutResult is None.")

        self.result = result
        self.settings_file = settings_file
        try:
            self.all_settings = self.load_settings_from_yaml(settings_file)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading plot settings from {self.settings_file}: {e}")
            self.all_settings = {}

    @classmethod
    def load_settings_from_yaml(cls, yaml_path: str) -> dict:
        """
        Load settings from a YAML file and return as a dictionary.

        Args:
            yaml_path: Path to the YAML settings file.
        Returns:
            dict: Settings loaded from YAML.
        """
        with open(yaml_path, 'r') as f:
            settings = yaml.safe_load(f)
        return settings or {}

    def settings_for(self, section: str) -> SettingsManager:
        """Merge the common section with one layout section, scaled by sponsor count."""
        merged = dict(self.all_settings.get('common', {}) or {})
        merged[section] = self.all_settings.get(section, {}) or {}
        return SettingsManager(merged, num_items=len(self.result.placed))

    @staticmethod
    def flow_positions(
        placed: list[PlacedSponsor],
        container_width: float,
        gap: float,
        padding: float,
    ) -> tuple[list[tuple[float, float]], float]:
        """
        Wrap boxes into centred rows in rank order.

        Args:
            placed: Placed sponsors in rank order.
            container_width: Available width in px.
            gap: Space between boxes and between rows.
            padding: Space around the content.

        Returns:
            tuple: (top-left corner per sponsor, total content height).
        """
        usable = container_width - 2 * padding
        rows: list[list[int]] = []
        row_width = 0.0
        for index, item in enumerate(placed):
            if rows and row_width + gap + item.width <= usable:
                rows[-1].append(index)
                row_width += gap + item.width
            else:
                rows.append([index])
                row_width = item.width

        corners: list[tuple[float, float]] = [(0.0, 0.0)] * len(placed)
        y = padding
        for row in rows:
            total = sum(placed[i].width for i in row) + gap * (len(row) - 1)
            row_height = max(placed[i].height for i in row)
            x = padding + max(0.0, (usable - total) / 2)
            for i in row:
                corners[i] = (x, y + (row_height - placed[i].height) / 2)
                x += placed[i].width + gap
            y += row_height + gap

        height = y - gap + padding if rows else 2 * padding
        return corners, height

    def _new_figure(self, width: float, height: float, mgr: SettingsManager) -> tuple[plt.Figure, plt.Axes]:
        fig = plt.figure(figsize=(width / self.PX_PER_INCH, height / self.PX_PER_INCH))
        ax = fig.add_axes([0, 0, 1, 1])
        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)
        ax.axis('off')
        background = mgr.get('page.background_colour', '#1a1a1a')
        fig.patch.set_facecolor(background)
        ax.set_facecolor(background)
        return fig, ax

    def _draw_logo(self, ax: plt.Axes, placed: PlacedSponsor, x: float, y: float,
                   logo_width: float, mgr: SettingsManager, alpha: float) -> float:
        """Draw a logo (local image file, else a labelled placeholder); return its height."""
        logo_height = logo_width * LOGO_ASPECT
        logo_path = Path(placed.sponsor.logo_url) if placed.sponsor.logo_url else None
        if logo_path is not None and logo_path.is_file():
            try:
                image = mpimg.imread(logo_path)
                ax.imshow(image, extent=(x, x + logo_width, y + logo_height, y), alpha=alpha, aspect='auto')
                return logo_height
            except (OSError, ValueError, SyntaxError) as e:
                logger.debug(f"Could not read logo {logo_path}: {e}")

        ax.add_patch(
            patches.FancyBboxPatch(
                (x, y),
                logo_width,
                logo_height,
                boxstyle='round,pad=0,rounding_size=4',
                facecolor=mgr.get('logo.face_colour'),
                edgecolor=mgr.get('logo.edge_colour'),
                linewidth=1,
                alpha=alpha,
            )
        )
        ax.text(
            x + logo_width / 2,
            y + logo_height / 2,
            placed.sponsor.name,
            ha='center',
            va='center',
            fontsize=mgr.get('logo.label_fontsize', 10),
            color=mgr.get('logo.label_colour'),
            alpha=alpha,
            clip_on=True,
        )
        return logo_height

    def draw_sponsor(self, ax: plt.Axes, placed: PlacedSponsor, x: float, y: float,
                     mgr: SettingsManager, scale: float = 1.0) -> None:
        """
        Draw one sponsor inside its footprint box at (x, y).

        Args:
            ax: Axes to draw on.
            placed: The placed sponsor (variant and footprint already resolved).
            x: Left edge of the box.
            y: Top edge of the box.
            mgr: Settings for the active layout.
            scale: Extra scale applied when fitting into fixed grid cells.
        """
        alpha = mgr.get('text.dimmed_alpha', 0.45) if placed.dimmed else 1.0
        width = placed.width * scale
        height = placed.height * scale
        sponsor = placed.sponsor

        if placed.variant is Variant.TEXT_ONLY:
            font_scale = mgr.get('text.font_scale', 1.0)
            colour = mgr.get('text.pending_colour') if placed.dimmed else mgr.get('text.colour')
            ax.text(
                x + width / 2,
                y + height / 2,
                sponsor.name,
                ha='center',
                va='center',
                fontsize=sponsor.font_size * scale * font_scale,
                fontweight=mgr.get('text.font_weight', 'normal'),
                color=colour,
                alpha=alpha,
            )
            return

        if placed.variant in (Variant.LOGO_ONLY, Variant.LOGO_WITH_NAME):
            logo_width = sponsor.logo_width * scale
            logo_x = x + (width - logo_width) / 2
            logo_y = y + LOGO_PADDING * scale / 2
            logo_height = self._draw_logo(ax, placed, logo_x, logo_y, logo_width, mgr, alpha)
            if placed.variant is Variant.LOGO_WITH_NAME:
                ax.text(
                    x + width / 2,
                    logo_y + logo_height + 2 * scale,
                    sponsor.display_name,
                    ha='center',
                    va='top',
                    fontsize=mgr.get('logo.caption_fontsize', 12) * scale,
                    color=mgr.get('logo.caption_colour'),
                    alpha=alpha,
                    wrap=True,
                )

    def _draw_empty(self, title: str = "") -> plt.Figure:
        mgr = self.settings_for('empty')
        width = mgr.get('empty.width', 600)
        height = mgr.get('empty.height', 200)
        fig, ax = self._new_figure(width, height, mgr)
        ax.text(
            width / 2,
            height / 2,
            EMPTY_STATE_MESSAGE,
            ha='center',
            va='center',
            fontsize=mgr.get('empty.message_fontsize', 16),
            color=mgr.get('empty.message_colour', '#999999'),
        )
        self._draw_title(ax, title, width, mgr)
        return fig

    def _draw_title(self, ax: plt.Axes, title: str, width: float, mgr: SettingsManager) -> None:
        if not title:
            return
        ax.text(
            width / 2,
            mgr.get('page.title_height', 40) / 2,
            title,
            ha='center',
            va='center',
            fontsize=mgr.get('page.title_fontsize', 16),
            color=mgr.get('page.title_colour'),
        )

    def _draw_cloud(self, title: str = "") -> plt.Figure:
        mgr = self.settings_for('cloud')
        width = self.result.width or 600
        height = self.result.height or 800
        fig, ax = self._new_figure(width, height, mgr)
        ax.add_patch(
            patches.Rectangle((0, 0), width, height, fill=False,
                              edgecolor=mgr.get('cloud.border_colour'), linewidth=1)
        )
        for placed in self.result.placed:
            self.draw_sponsor(ax, placed, placed.x, placed.y, mgr)
        self._draw_title(ax, title, width, mgr)
        return fig

    def _draw_slot(self, ax: plt.Axes, slot: GridSlot, x: float, y: float,
                   cell_width: float, cell_height: float, mgr: SettingsManager) -> None:
        if slot.status is SlotStatus.FILLED and slot.placed is not None:
            placed = slot.placed
            scale = min(1.0, cell_width / placed.width, cell_height / placed.height) if placed.width else 1.0
            box_x = x + (cell_width - placed.width * scale) / 2
            box_y = y + (cell_height - placed.height * scale) / 2
            self.draw_sponsor(ax, placed, box_x, box_y, mgr, scale)
        elif slot.status is SlotStatus.RESERVED:
            ax.text(
                x + cell_width / 2,
                y + cell_height / 2,
                "Reserved",
                ha='center',
                va='center',
                fontstyle='italic',
                fontsize=mgr.get('grid.reserved_fontsize'),
                color=mgr.get('grid.reserved_colour'),
            )
        elif slot.status is SlotStatus.AVAILABLE:
            ax.add_patch(
                patches.Rectangle(
                    (x, y),
                    cell_width,
                    cell_height,
                    fill=False,
                    linestyle='--',
                    edgecolor=mgr.get('grid.empty_border_colour'),
                    linewidth=1,
                )
            )
            ax.text(
                x + 6,
                y + 6,
                f"#{slot.position.position_id}",
                ha='left',
                va='top',
                fontsize=mgr.get('grid.badge_fontsize'),
                fontweight='bold',
                color=mgr.get('grid.badge_colour'),
            )

    @staticmethod
    def section_title(section: str) -> str:
        """Heading for a section label: 'top' becomes 'Top Section'."""
        label = section.strip()
        return f"{label.capitalize()} Section" if label else "Other Positions"

    def _draw_section_header(self, ax: plt.Axes, summary: SectionSummary, x: float, y: float,
                             width: float, mgr: SettingsManager) -> None:
        """Draw one section header row: title on the left, price and availability on the right."""
        header_height = mgr.get('grid.section_header_height', 36)
        middle = y + header_height / 2
        ax.text(
            x,
            middle,
            self.section_title(summary.section),
            ha='left',
            va='center',
            fontsize=mgr.get('grid.section_title_fontsize', 14),
            fontweight='bold',
            color=mgr.get('grid.section_title_colour'),
        )
        ax.text(
            x + width,
            middle,
            f"${summary.price:g}  {summary.available} / {summary.total} available",
            ha='right',
            va='center',
            fontsize=mgr.get('grid.section_detail_fontsize', 12),
            color=mgr.get('grid.section_detail_colour'),
        )

    def _draw_grid(self, title: str = "") -> plt.Figure:
        mgr = self.settings_for('grid')
        cell_width = mgr.get('grid.cell_width', 150)
        cell_height = mgr.get('grid.cell_height', 120)
        gap = mgr.get('grid.gap', 24)
        padding = mgr.get('grid.padding', 48)
        header_height = mgr.get('grid.section_header_height', 36)
        columns = self.result.columns or 1

        # Sectioned grids start each section on a new row under its own header
        if any(slot.position.section for slot in self.result.slots):
            blocks = [(summary, list(summary.slots)) for summary in group_sections(self.result.slots)]
        else:
            blocks = [(None, list(self.result.slots))]

        content_width = columns * cell_width + (columns - 1) * gap
        content_height = 0.0
        for summary, slots in blocks:
            rows = max(1, -(-len(slots) // columns))
            if summary is not None:
                content_height += header_height
            content_height += rows * cell_height + (rows - 1) * gap
        content_height += gap * (len(blocks) - 1)

        width = 2 * padding + content_width
        height = 2 * padding + content_height
        fig, ax = self._new_figure(width, height, mgr)

        top = padding
        for summary, slots in blocks:
            if summary is not None:
                self._draw_section_header(ax, summary, padding, top, content_width, mgr)
                top += header_height
            for index, slot in enumerate(slots):
                row, col = divmod(index, columns)
                x = padding + col * (cell_width + gap)
                y = top + row * (cell_height + gap)
                self._draw_slot(ax, slot, x, y, cell_width, cell_height, mgr)
            rows = max(1, -(-len(slots) // columns))
            top += rows * cell_height + rows * gap

        self._draw_title(ax, title, width, mgr)
        return fig

    def _draw_flow(self, title: str = "") -> plt.Figure:
        mgr = self.settings_for('flow')
        width = mgr.get('flow.container_width', 600)
        corners, content_height = self.flow_positions(
            self.result.placed,
            width,
            mgr.get('flow.gap', 20),
            mgr.get('flow.padding', 20),
        )
        height = max(mgr.get('flow.min_height', 800), content_height)
        fig, ax = self._new_figure(width, height, mgr)
        for placed, (x, y) in zip(self.result.placed, corners):
            self.draw_sponsor(ax, placed, x, y, mgr)
        self._draw_title(ax, title, width, mgr)
        return fig

    def build_figure(self, title: str = "") -> plt.Figure:
        """Build the figure for the result's mode (empty results get the empty-state message)."""
        if self.result.is_empty:
            return self._draw_empty(title)
        if self.result.mode == 'cloud':
            return self._draw_cloud(title)
        if self.result.mode == 'grid':
            return self._draw_grid(title)
        return self._draw_flow(title)

    def plot(self, save_file: str, title: str = "", show_plot: bool = False) -> str:
        """
        Render the layout and save it to file.

        Args:
            save_file: Output file path.
            title: Optional title drawn at the top.
            show_plot: Whether to display the plot on screen (default False).
        Returns:
            str: The saved file path.
        """
        fig = self.build_figure(title)
        dpi = self.settings_for('common').get('page.dpi', 144)
        if show_plot:
            plt.show()
        fig.savefig(save_file, dpi=dpi, facecolor=fig.get_facecolor())
        plt.close(fig)
        logger.debug(f"Saved {self.result.mode} layout image to {save_file}")
        return str(save_file)

    @staticmethod
    def show_saved_plots(plot_files: list[str]) -> None:
        """
        Open saved plot images with the system's default image viewer.

        Args:
            plot_files: List of file paths to saved plot images.
        """
        import subprocess
        import sys

        if not plot_files:
            return

        for plot_file in plot_files:
            try:
                if sys.platform == 'darwin':  # macOS
                    subprocess.run(['open', plot_file], check=True)
                elif sys.platform == 'win32':  # Windows
                    subprocess.run(['start', '', plot_file], shell=True, check=True)
                else:  # Linux and other Unix-like
                    subprocess.run(['xdg-open', plot_file], check=True)
            except subprocess.CalledProcessError as e:
                logger.warning(f"Failed to open {plot_file}: {e}")
            except FileNotFoundError:
                logger.warning(f"Could not find system image viewer for {plot_file}")
