"""Multivariate probability helpers: MVN/MVT, Mahalanobis, normality checks, PCA, MDS."""
import numpy as np
import pandas as pd
from scipy import stats
from sklearn.decomposition import PCA
from sklearn.preprocessing import StandardScaler

from coursekit.errors import InsufficientDataError


def group_summary(df, group):
    """Per-group mean and variance of every numeric column, in long form."""
    numeric = df.select_dtypes(include=[np.number]).columns.tolist()
    long = df.melt(id_vars=group, value_vars=numeric, var_name="variable")
    return (
        long.groupby([group, "variable"], observed=True)["value"]
        .agg(["mean", "var"])
        .reset_index()
    )


def sample_mvn(mean, cov, n, seed=42):
    """Draw n samples from a multivariate normal."""
    rng = np.random.RandomState(seed)
    return rng.multivariate_normal(np.asarray(mean, dtype=float), np.asarray(cov, dtype=float), size=n)


def mvn_density(points, mean, cov):
    """Multivariate normal density at each point."""
    return stats.multivariate_normal(mean=mean, cov=cov).pdf(points)


def sample_mvt(loc, shape, df, n, seed=42):
    """Draw n samples from a multivariate t with df degrees of freedom."""
    return stats.multivariate_t(loc=loc, shape=shape, df=df).rvs(size=n, random_state=seed)


def _as_matrix(X):
    X = np.asarray(X, dtype=float)
    if X.ndim != 2:
        raise ValueError(f"expected a 2-D data matrix, got shape {X.shape}")
    return X


def mahalanobis_distances(X, mean=None, cov=None):
    """Squared Mahalanobis distance of every row from mean (sample mean by default)."""
    X = _as_matrix(X)
    mean = X.mean(axis=0) if mean is None else np.asarray(mean, dtype=float)
    cov = np.cov(X, rowvar=False) if cov is None else np.asarray(cov, dtype=float)
    diff = X - mean
    return np.einsum("ij,jk,ik->i", diff, np.linalg.inv(cov), diff)


def chi2_qq(X):
    """Ordered squared Mahalanobis distances against chi-squared(p) quantiles."""
    X = _as_matrix(X)
    n, p = X.shape
    d2 = np.sort(mahalanobis_distances(X))
    probs = (np.arange(1, n + 1) - 0.5) / n
    return pd.DataFrame({"theoretical": stats.chi2.ppf(probs, df=p), "observed": d2})


def mardia_test(X):
    """Mardia's multivariate skewness and kurtosis tests."""
    X = _as_matrix(X)
    n, p = X.shape
    if n <= p:
        raise InsufficientDataError(f"Mardia's test needs more rows ({n}) than columns ({p})")
    diff = X - X.mean(axis=0)
    S = diff.T @ diff / n
    G = diff @ np.linalg.inv(S) @ diff.T

    b1p = (G ** 3).sum() / n ** 2
    b2p = (np.diag(G) ** 2).sum() / n
    skew_stat = n * b1p / 6
    skew_df = p * (p + 1) * (p + 2) / 6
    kurt_stat = (b2p - p * (p + 2)) / np.sqrt(8 * p * (p + 2) / n)

    return {
        "skewness": b1p,
        "skew_statistic": skew_stat,
        "skew_p_value": stats.chi2.sf(skew_stat, df=skew_df),
        "kurtosis": b2p,
        "kurt_statistic": kurt_stat,
        "kurt_p_value": 2 * stats.norm.sf(abs(kurt_stat)),
    }


def conditional_mvn(mean, cov, given_idx, given_values):
    """Mean and covariance of the remaining coordinates given some fixed ones."""
    mean = np.asarray(mean, dtype=float)
    cov = np.asarray(cov, dtype=float)
    given_idx = list(np.atleast_1d(given_idx))
    rest = [i for i in range(len(mean)) if i not in given_idx]

    s11 = cov[np.ix_(rest, rest)]
    s12 = cov[np.ix_(rest, given_idx)]
    s22 = cov[np.ix_(given_idx, given_idx)]
    gain = s12 @ np.linalg.inv(s22)
    cond_mean = mean[rest] + gain @ (np.atleast_1d(given_values) - mean[given_idx])
    cond_cov = s11 - gain @ s12.T
    return cond_mean, cond_cov


def pca_summary(df, scale=True, n_components=None):
    """PCA of the numeric columns: loadings, variance explained and scores."""
    numeric = df.select_dtypes(include=[np.number]).dropna()
    X = numeric.to_numpy()
    if scale:
        X = StandardScaler().fit_transform(X)
    pca = PCA(n_components=n_components)
    scores = pca.fit_transform(X)
    names = [f"PC{i + 1}" for i in range(pca.n_components_)]
    return {
        "loadings": pd.DataFrame(pca.components_.T, index=numeric.columns, columns=names),
        "explained": pd.Series(pca.explained_variance_ratio_, index=names),
        "cumulative": pd.Series(np.cumsum(pca.explained_variance_ratio_), index=names),
        "scores": pd.DataFrame(scores, index=numeric.index, columns=names),
    }


def classical_mds(D, k=2):
    """Torgerson scaling: coordinates whose Euclidean distances approximate D."""
    D = np.asarray(D, dtype=float)
    n = D.shape[0]
    J = np.eye(n) - np.ones((n, n)) / n
    B = -0.5 * J @ (D ** 2) @ J
    eigvals, eigvecs = np.linalg.eigh(B)
    order = np.argsort(eigvals)[::-1][:k]
    vals = np.clip(eigvals[order], 0, None)
    return eigvecs[:, order] * np.sqrt(vals)
