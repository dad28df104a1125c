"""Monthly and overall summaries of categorized transactions."""

from typing import Any, Dict, List, Sequence

import pandas as pd

from bank_ocr_parser.parsers.models import CategorizedTransaction, TransactionType
from bank_ocr_parser.utils.exceptions import SummaryCalculationError
from bank_ocr_parser.utils.logger import get_logger

COLUMNS = ["Date", "Description", "Amount", "Type", "Balance", "Reconciled"]


class TransactionSummarizer:
    """Computes debit, credit and unknown totals per month and overall."""

    def __init__(self, top_n: int = 5) -> None:
        """Initialize transaction summarizer.

        Args:
            top_n: Number of largest debits and credits to report.
        """
        self.logger = get_logger(__name__)
        self.top_n = top_n

    def to_dataframe(self, transactions: Sequence[CategorizedTransaction]) -> pd.DataFrame:
        """Build a DataFrame with one row per transaction, in document order."""
        rows = [
            {
                "Date": t.date,
                "Description": t.description,
                "Amount": float(t.amount),
                "Type": t.type.value,
                "Balance": float(t.balance) if t.balance is not None else None,
                "Reconciled": t.reconciled,
            }
            for t in transactions
        ]
        df = pd.DataFrame(rows, columns=COLUMNS)
        df["Date"] = pd.to_datetime(df["Date"])
        return df

    @staticmethod
    def _totals(df: pd.DataFrame) -> Dict[str, Any]:
        debits = df.loc[df["Type"] == TransactionType.DEBIT.value, "Amount"]
        credits = df.loc[df["Type"] == TransactionType.CREDIT.value, "Amount"]
        unknown = df.loc[df["Type"] == TransactionType.UNKNOWN.value, "Amount"]

        total_debits = round(float(debits.sum()), 2)
        total_credits = round(float(credits.sum()), 2)
        return {
            "transaction_count": int(len(df)),
            "debit_count": int(len(debits)),
            "credit_count": int(len(credits)),
            "unknown_count": int(len(unknown)),
            "total_debits": total_debits,
            "total_credits": total_credits,
            "total_unknown": round(float(unknown.sum()), 2),
            "net_amount": round(total_credits - total_debits, 2),
        }

    def calculate_monthly_summaries(
        self,
        transactions: Sequence[CategorizedTransaction]
    ) -> List[Dict[str, Any]]:
        """Calculate totals for each calendar month.

        Args:
            transactions: Categorized transactions.

        Returns:
            One summary per month, earliest month first.

        Raises:
            SummaryCalculationError: If the totals cannot be computed.
        """
        try:
            df = self.to_dataframe(transactions)
            if df.empty:
                return []

            df["Month"] = df["Date"].dt.strftime("%Y-%m")
            summaries = [
                {"month": month, **self._totals(group)}
                for month, group in df.groupby("Month", sort=True)
            ]
        except Exception as e:
            raise SummaryCalculationError(f"Failed to calculate monthly summaries: {str(e)}") from e

        self.logger.info(f"Calculated summaries for {len(summaries)} months")
        return summaries

    def _top(self, df: pd.DataFrame, transaction_type: TransactionType) -> List[Dict[str, Any]]:
        subset = df[df["Type"] == transaction_type.value].nlargest(self.top_n, "Amount")
        return [
            {
                "date": row.Date.strftime("%Y-%m-%d"),
                "description": row.Description,
                "amount": row.Amount,
            }
            for row in subset.itertuples(index=False)
        ]

    def generate_summary(self, transactions: Sequence[CategorizedTransaction]) -> Dict[str, Any]:
        """Generate the overall summary of a statement.

        Args:
            transactions: Categorized transactions.

        Returns:
            Dictionary with overall totals, analysis period, monthly
            summaries and the largest debits and credits.

        Raises:
            SummaryCalculationError: If the summary cannot be computed.
        """
        if not transactions:
            return {
                "overall_totals": self._totals(self.to_dataframe([])),
                "analysis_period": None,
                "monthly_summaries": [],
                "top_debits": [],
                "top_credits": [],
                "unreconciled_count": 0,
            }

        try:
            df = self.to_dataframe(transactions)
            start, end = df["Date"].min(), df["Date"].max()
            summary = {
                "overall_totals": self._totals(df),
                "analysis_period": {
                    "start_date": start.strftime("%Y-%m-%d"),
                    "end_date": end.strftime("%Y-%m-%d"),
                    "total_days": int((end - start).days) + 1,
                },
                "monthly_summaries": self.calculate_monthly_summaries(transactions),
                "top_debits": self._top(df, TransactionType.DEBIT),
                "top_credits": self._top(df, TransactionType.CREDIT),
                "unreconciled_count": int(
                    (~df["Reconciled"].astype(bool) & (df["Type"] != TransactionType.UNKNOWN.value)).sum()
                ),
            }
        except SummaryCalculationError:
            raise
        except Exception as e:
            raise SummaryCalculationError(f"Failed to generate summary: {str(e)}") from e

        self.logger.info(f"Generated summary for {len(transactions)} transactions")
        return summary
