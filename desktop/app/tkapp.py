"""Tkinter desktop application for the expense tracker."""

from __future__ import annotations

import argparse
import logging
import tkinter as tk
from tkinter import messagebox, ttk
from typing import Callable, Iterable, Optional

from expense_core.config import Settings, configure_logging, load_settings
from expense_core.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from expense_core.filters import ChartSeries, SpendingSummary, WindowFilter
from expense_core.models import Expense
from expense_core.services import ExpenseService, open_service

from .formatting import (
    category_lines,
    edit_form_errors,
    edit_form_values,
    format_amount_display,
    format_bar_value,
    format_currency,
    sanitize_amount_input,
    truncate_label,
)

logger = logging.getLogger(__name__)

PRIMARY_BG = "#0f172a"
SECONDARY_BG = "#1e293b"
ACCENT_BG = "#1d4ed8"
ACCENT_ACTIVE_BG = "#2563eb"
TEXT_PRIMARY = "#e2e8f0"
TEXT_MUTED = "#94a3b8"
HIGHLIGHT = "#fbbf24"

BAR_WIDTH = 24
BAR_GAP = 28
CHART_PADDING = 24


def _reformat_amount(var: tk.StringVar) -> None:
    var.set(format_amount_display(var.get()))


class CategoryChart(ttk.Frame):
    """Bar chart of per-category totals drawn on a scrollable canvas."""

    def __init__(self, master: tk.Misc) -> None:
        super().__init__(master, padding=12, style="Panel.TFrame")
        self.title_var = tk.StringVar(value="Spending by Category")

        ttk.Label(self, textvariable=self.title_var, style="CardTitle.TLabel").grid(
            row=0, column=0, sticky="w"
        )
        ttk.Label(self, text="Amount ($)", style="FormLabel.TLabel").grid(
            row=1, column=0, sticky="w", pady=(0, 4)
        )
        self.canvas = tk.Canvas(
            self, height=190, background=SECONDARY_BG, highlightthickness=0, borderwidth=0
        )
        self.canvas.grid(row=2, column=0, sticky="ew")
        hsb = ttk.Scrollbar(self, orient="horizontal", command=self.canvas.xview)
        hsb.grid(row=3, column=0, sticky="ew")
        self.canvas.configure(xscrollcommand=hsb.set)
        ttk.Label(self, text="Categories", style="FormLabel.TLabel").grid(
            row=4, column=0, pady=(4, 0)
        )
        self.columnconfigure(0, weight=1)

    def render(self, series: ChartSeries, label: str) -> None:
        self.title_var.set(f"Spending by Category ({label})")
        self.canvas.delete("all")
        if not len(series):
            self.canvas.create_text(
                CHART_PADDING, 90, text="No data to display.", fill=TEXT_MUTED, anchor="w"
            )
            self.canvas.configure(scrollregion=(0, 0, 0, 0))
            return

        baseline = CHART_PADDING + series.scale
        for index, (category, amount, height) in enumerate(series.heights()):
            left = CHART_PADDING + index * (BAR_WIDTH + BAR_GAP)
            center = left + BAR_WIDTH / 2
            self.canvas.create_rectangle(
                left, baseline - height, left + BAR_WIDTH, baseline, fill=HIGHLIGHT, outline=""
            )
            self.canvas.create_text(
                center, baseline + 10, text=format_bar_value(amount), fill=TEXT_PRIMARY,
                font=("Segoe UI", 8),
            )
            self.canvas.create_text(
                center, baseline + 24, text=truncate_label(category), fill=TEXT_PRIMARY,
                font=("Segoe UI", 8),
            )
        width = CHART_PADDING * 2 + len(series) * (BAR_WIDTH + BAR_GAP)
        self.canvas.configure(scrollregion=(0, 0, width, baseline + 36))


class EditExpenseDialog(tk.Toplevel):
    """Modal editor for a single expense."""

    def __init__(
        self,
        master: tk.Misc,
        service: ExpenseService,
        expense: Expense,
        on_saved: Callable[[], None],
    ) -> None:
        super().__init__(master, background=PRIMARY_BG)
        self.title("Edit Expense")
        self.resizable(False, False)
        self.transient(master)

        self.service = service
        self.expense = expense
        self.on_saved = on_saved

        values = edit_form_values(expense)
        self.amount_var = tk.StringVar(value=values["amount"])
        self.category_var = tk.StringVar(value=values["category"])
        self.note_var = tk.StringVar(value=values["note"])
        self.date_var = tk.StringVar(value=values["date"])

        self._build()
        self.protocol("WM_DELETE_WINDOW", self.cancel)
        self.bind("<Escape>", lambda _event: self.cancel())
        self.bind("<Return>", lambda _event: self.save())
        self.grab_set()

    def _build(self) -> None:
        form = ttk.Frame(self, padding=16, style="Panel.TFrame")
        form.grid(row=0, column=0, sticky="nsew")
        form.columnconfigure(0, weight=1)

        ttk.Label(form, text="Edit Expense", style="CardTitle.TLabel").grid(
            row=0, column=0, sticky="w", pady=(0, 8)
        )
        fields = (
            ("Amount", self.amount_var),
            ("Category", self.category_var),
            ("Note (optional)", self.note_var),
            ("Date (YYYY-MM-DD)", self.date_var),
        )
        for offset, (label, var) in enumerate(fields):
            row = 1 + offset * 2
            ttk.Label(form, text=label, style="FormLabel.TLabel").grid(
                row=row, column=0, sticky="w", padx=4, pady=(4, 0)
            )
            entry = ttk.Entry(form, textvariable=var, width=32, style="App.TEntry")
            entry.grid(row=row + 1, column=0, sticky="ew", padx=4, pady=(0, 8))
            if var is self.amount_var:
                entry.bind("<FocusOut>", lambda _event: _reformat_amount(self.amount_var))

        buttons = ttk.Frame(form, style="Panel.TFrame")
        buttons.grid(row=9, column=0, sticky="ew", pady=(8, 0))
        buttons.columnconfigure(0, weight=1)
        ttk.Button(buttons, text="Cancel", command=self.cancel, style="Secondary.TButton").grid(
            row=0, column=0, sticky="w", padx=4
        )
        ttk.Button(buttons, text="Save", command=self.save, style="Primary.TButton").grid(
            row=0, column=1, sticky="e", padx=4
        )

    def save(self) -> None:
        payload = {
            "amount": sanitize_amount_input(self.amount_var.get()),
            "category": self.category_var.get(),
            "note": self.note_var.get(),
            "date": self.date_var.get(),
        }
        errors = edit_form_errors(payload)
        if errors:
            messagebox.showerror("Invalid Expense", "\n".join(errors), parent=self)
            return
        try:
            self.service.update(self.expense.id, payload)
        except ValidationError as exc:
            messagebox.showerror("Invalid Expense", str(exc), parent=self)
            return
        except PersistenceError as exc:
            messagebox.showerror("Storage Error", str(exc), parent=self)
            return
        self.close()
        self.on_saved()

    def cancel(self) -> None:
        self.close()

    def close(self) -> None:
        self.grab_release()
        self.destroy()


class ExpenseScreen(ttk.Frame):
    """Filter selector, totals, chart, add form and expense list in one view."""

    def __init__(self, master: tk.Misc, service: ExpenseService) -> None:
        super().__init__(master, padding=16, style="TFrame")
        self.service = service

        self.filter_var = tk.StringVar(value=WindowFilter.ALL.value)
        self.amount_var = tk.StringVar()
        self.category_var = tk.StringVar()
        self.note_var = tk.StringVar()
        self.total_title_var = tk.StringVar()
        self.total_var = tk.StringVar(value=format_currency(0))
        self.by_category_title_var = tk.StringVar()
        self.by_category_var = tk.StringVar()
        self.summary: Optional[SpendingSummary] = None

        self.columnconfigure(0, weight=1)
        self.columnconfigure(1, weight=1)
        self.rowconfigure(3, weight=1)

        self._build_filters()
        self._build_totals()
        self.chart = CategoryChart(self)
        self.chart.grid(row=1, column=1, sticky="nsew", padx=(6, 0), pady=(0, 12))
        self._build_form()
        self._build_table()

    @property
    def mode(self) -> WindowFilter:
        return WindowFilter(self.filter_var.get())

    def _build_filters(self) -> None:
        bar = ttk.Frame(self, style="TFrame")
        bar.grid(row=0, column=0, columnspan=2, sticky="w", pady=(0, 8))
        for column, mode in enumerate(WindowFilter):
            ttk.Radiobutton(
                bar,
                text=mode.label,
                value=mode.value,
                variable=self.filter_var,
                command=self.refresh,
                style="Filter.Toolbutton",
            ).grid(row=0, column=column, padx=(0, 8))

    def _build_totals(self) -> None:
        box = ttk.Frame(self, padding=12, style="Panel.TFrame")
        box.grid(row=1, column=0, sticky="nsew", padx=(0, 6), pady=(0, 12))
        ttk.Label(box, textvariable=self.total_title_var, style="MetricLabel.TLabel").grid(
            row=0, column=0, sticky="w"
        )
        ttk.Label(box, textvariable=self.total_var, style="Total.TLabel").grid(
            row=1, column=0, sticky="w"
        )
        ttk.Label(box, textvariable=self.by_category_title_var, style="MetricLabel.TLabel").grid(
            row=2, column=0, sticky="w", pady=(8, 0)
        )
        ttk.Label(
            box, textvariable=self.by_category_var, style="FormLabel.TLabel", justify="left"
        ).grid(row=3, column=0, sticky="w")

    def _build_form(self) -> None:
        form = ttk.LabelFrame(self, text="Add Expense", style="Card.TLabelframe")
        form.grid(row=2, column=0, columnspan=2, sticky="ew", pady=(0, 12))
        for column in range(3):
            form.columnconfigure(column, weight=1)

        def add_field(label: str, var: tk.StringVar, column: int) -> ttk.Entry:
            ttk.Label(form, text=label, style="FormLabel.TLabel").grid(
                column=column, row=0, sticky="w", padx=4, pady=4
            )
            entry = ttk.Entry(form, textvariable=var, style="App.TEntry")
            entry.grid(column=column, row=1, sticky="ew", padx=4, pady=(0, 8))
            return entry

        amount_entry = add_field("Amount (e.g. 12.50)", self.amount_var, 0)
        amount_entry.bind("<FocusOut>", lambda _event: _reformat_amount(self.amount_var))
        add_field("Category (Food, Books, Rent...)", self.category_var, 1)
        note_entry = add_field("Note (optional)", self.note_var, 2)
        note_entry.bind("<Return>", lambda _event: self.submit())

        ttk.Button(form, text="Add Expense", command=self.submit, style="Primary.TButton").grid(
            column=2, row=2, sticky="e", padx=4, pady=4
        )

    def _build_table(self) -> None:
        table_frame = ttk.Frame(self, style="Panel.TFrame")
        table_frame.grid(row=3, column=0, columnspan=2, sticky="nsew")
        table_frame.columnconfigure(0, weight=1)
        table_frame.rowconfigure(0, weight=1)

        columns = ("date", "category", "amount", "note")
        self.tree = ttk.Treeview(
            table_frame,
            columns=columns,
            show="headings",
            height=8,
            style="App.Treeview",
        )
        headings = {"date": "Date", "category": "Category", "amount": "Amount", "note": "Note"}
        for key, label in headings.items():
            width = 220 if key == "note" else 120
            self.tree.heading(key, text=label, anchor="w")
            self.tree.column(key, width=width, anchor="w")
        self.tree.bind("<Double-1>", lambda _event: self.edit_selected())

        vsb = ttk.Scrollbar(table_frame, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscroll=vsb.set)
        self.tree.grid(row=0, column=0, sticky="nsew")
        vsb.grid(row=0, column=1, sticky="ns")

        self.empty_label = ttk.Label(table_frame, text="No expenses yet.", style="FormLabel.TLabel")

        button_bar = ttk.Frame(table_frame, style="Panel.TFrame")
        button_bar.grid(row=2, column=0, columnspan=2, sticky="ew", pady=8)
        button_bar.columnconfigure(0, weight=1)
        ttk.Label(
            button_bar,
            text="Enter your expenses and they'll be saved locally with SQLite.",
            style="FormLabel.TLabel",
        ).grid(row=0, column=0, sticky="w", padx=4)
        ttk.Button(
            button_bar, text="Edit", command=self.edit_selected, style="Secondary.TButton"
        ).grid(row=0, column=1, padx=4)
        ttk.Button(
            button_bar, text="Delete", command=self.delete_selected, style="Secondary.TButton"
        ).grid(row=0, column=2, padx=4)

    def submit(self) -> None:
        payload = {
            "amount": sanitize_amount_input(self.amount_var.get()),
            "category": self.category_var.get(),
            "note": self.note_var.get(),
        }
        try:
            self.service.add(payload)
        except ValidationError as exc:
            # The add form ignores bad input without interrupting the user.
            logger.debug("Ignoring invalid expense submission: %s", exc)
            return
        except PersistenceError as exc:
            messagebox.showerror("Storage Error", str(exc), parent=self)
            return

        self.reset_form()
        self.refresh()

    def reset_form(self) -> None:
        self.amount_var.set("")
        self.category_var.set("")
        self.note_var.set("")

    def edit_selected(self) -> None:
        expense_id = self._selected_id()
        if expense_id is None:
            messagebox.showinfo("No selection", "Please select an expense to edit.", parent=self)
            return
        try:
            expense = self.service.get(expense_id)
        except RecordNotFoundError as exc:
            messagebox.showwarning("Not Found", str(exc), parent=self)
            self.refresh()
            return
        except PersistenceError as exc:
            messagebox.showerror("Storage Error", str(exc), parent=self)
            return
        EditExpenseDialog(self.winfo_toplevel(), self.service, expense, self.refresh)

    def delete_selected(self) -> None:
        selection = self.tree.selection()
        if not selection:
            messagebox.showinfo("No selection", "Please select an expense to delete.", parent=self)
            return
        for item_id in selection:
            try:
                self.service.delete(int(item_id))
            except PersistenceError as exc:
                messagebox.showerror("Storage Error", str(exc), parent=self)
                break
        self.refresh()

    def refresh(self) -> None:
        try:
            summary = self.service.summary(self.mode)
        except PersistenceError as exc:
            messagebox.showerror("Storage Error", str(exc), parent=self)
            return
        self.summary = summary
        self._populate(summary)
        self._render_totals(summary)
        self.chart.render(summary.chart, summary.label)

    def _populate(self, summary: SpendingSummary) -> None:
        self.tree.delete(*self.tree.get_children())
        for expense in summary.records:
            values = (
                expense.date[:10] if expense.date else "",
                expense.category,
                format_currency(expense.amount),
                expense.note or "",
            )
            self.tree.insert("", "end", iid=str(expense.id), values=values)
        if summary.records:
            self.empty_label.grid_remove()
        else:
            self.empty_label.grid(row=1, column=0, pady=12)

    def _render_totals(self, summary: SpendingSummary) -> None:
        self.total_title_var.set(f"Total Spending ({summary.label}):")
        self.total_var.set(format_currency(summary.total))
        self.by_category_title_var.set(f"By Category ({summary.label}):")
        lines = category_lines(summary.by_category)
        self.by_category_var.set("\n".join(lines) if lines else "No expenses for this filter.")

    def _selected_id(self) -> Optional[int]:
        selection = self.tree.selection()
        if not selection:
            return None
        return int(selection[0])


class ExpenseTrackerApp(tk.Tk):
    """Main application window."""

    def __init__(self, settings: Settings) -> None:
        super().__init__()
        self.title("Student Expense Tracker")
        self.geometry("960x760")
        self.minsize(820, 640)
        self.configure(bg=PRIMARY_BG)

        self._configure_styles()

        settings.ensure_database_dir()
        self.service = open_service(settings.database_url)
        logger.info("Using database %s", settings.database_path)

        self._build_layout()
        self.protocol("WM_DELETE_WINDOW", self.shutdown)
        self.screen.refresh()

    def _configure_styles(self) -> None:
        style = ttk.Style(self)
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass

        style.configure("TFrame", background=PRIMARY_BG)
        style.configure("TLabel", background=PRIMARY_BG, foreground=TEXT_PRIMARY)

        style.configure("Panel.TFrame", background=SECONDARY_BG, relief="flat")
        style.configure("Card.TLabelframe", background=SECONDARY_BG, foreground=TEXT_PRIMARY)
        style.configure("Card.TLabelframe.Label", background=SECONDARY_BG, foreground=TEXT_PRIMARY)
        style.configure("Header.TFrame", background=PRIMARY_BG)

        style.configure("FormLabel.TLabel", background=SECONDARY_BG, foreground=TEXT_MUTED, font=("Segoe UI", 9))
        style.configure("Header.TLabel", background=PRIMARY_BG, foreground=TEXT_PRIMARY, font=("Segoe UI", 20, "bold"))
        style.configure("CardTitle.TLabel", background=SECONDARY_BG, foreground=TEXT_PRIMARY, font=("Segoe UI", 12, "bold"))
        style.configure("MetricLabel.TLabel", background=SECONDARY_BG, foreground=TEXT_PRIMARY, font=("Segoe UI", 9, "bold"))
        style.configure("Total.TLabel", background=SECONDARY_BG, foreground=HIGHLIGHT, font=("Segoe UI", 16, "bold"))

        style.configure(
            "App.TEntry",
            fieldbackground=SECONDARY_BG,
            background=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            insertcolor=TEXT_PRIMARY,
            bordercolor=ACCENT_BG,
        )
        style.map(
            "App.TEntry",
            fieldbackground=[("focus", SECONDARY_BG)],
            foreground=[("disabled", TEXT_MUTED)],
        )

        style.configure(
            "Primary.TButton",
            background=ACCENT_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=ACCENT_BG,
            padding=(18, 6),
        )
        style.map(
            "Primary.TButton",
            background=[("active", ACCENT_ACTIVE_BG)],
            foreground=[("disabled", TEXT_MUTED)],
        )

        style.configure(
            "Secondary.TButton",
            background=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=SECONDARY_BG,
            padding=(14, 6),
        )
        style.map(
            "Secondary.TButton",
            background=[("active", ACCENT_BG)],
            foreground=[("disabled", TEXT_MUTED)],
        )

        style.configure(
            "Filter.Toolbutton",
            background=PRIMARY_BG,
            foreground=TEXT_PRIMARY,
            bordercolor="#374151",
            padding=(10, 6),
        )
        style.map(
            "Filter.Toolbutton",
            background=[("selected", ACCENT_ACTIVE_BG), ("active", SECONDARY_BG)],
            foreground=[("selected", "#ffffff")],
        )

        style.configure(
            "App.Treeview",
            background=SECONDARY_BG,
            fieldbackground=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=SECONDARY_BG,
            rowheight=28,
        )
        style.configure(
            "App.Treeview.Heading",
            background=SECONDARY_BG,
            foreground=TEXT_MUTED,
            relief="flat",
        )
        style.map(
            "App.Treeview",
            background=[("selected", ACCENT_BG)],
            foreground=[("selected", TEXT_PRIMARY)],
        )

    def _build_layout(self) -> None:
        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)

        header = ttk.Frame(self, padding=(20, 16), style="Header.TFrame")
        header.grid(row=0, column=0, sticky="ew")
        ttk.Label(header, text="Student Expense Tracker", style="Header.TLabel").grid(
            row=0, column=0, sticky="w"
        )

        self.screen = ExpenseScreen(self, self.service)
        self.screen.grid(row=1, column=0, sticky="nsew")

    def shutdown(self) -> None:
        self.service.close()
        self.destroy()


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Tkinter desktop app for the expense tracker")
    parser.add_argument(
        "--database",
        type=str,
        default=None,
        help="SQLite database file (default: $EXPENSE_TRACKER_DB or ./data/expenses.db)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: $EXPENSE_TRACKER_LOG_LEVEL or INFO)",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        settings = load_settings(args.database, args.log_level)
    except ValueError as exc:
        parser.error(str(exc))
    configure_logging(settings.log_level)

    app = ExpenseTrackerApp(settings)
    app.mainloop()


if __name__ == "__main__":  # pragma: no cover - manual execution
    main()
